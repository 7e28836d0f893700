from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegistryAuth:
    username: str
    password: str = field(repr=False)
    registry: str = ''
