from dataclasses import dataclass


@dataclass
class Settings:
    resolve_names: bool = True
    max_literal_length: int = 10_000
    numeric_promotion: bool = True
