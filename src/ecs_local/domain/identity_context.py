from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IdentityContext:
    profile_name: str
    region: str
    role_arn: Optional[str] = None

    @property
    def cache_key(self) -> str:
        if self.role_arn:
            return f'{self.profile_name}|{self.role_arn}'

        return self.profile_name
