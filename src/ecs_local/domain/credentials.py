from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class Credentials:
    access_key: str
    secret_key: str
    session_token: Optional[str]
    expiry: Optional[datetime]
    provider_name: str

    def usable_at(self, now: datetime, safety_margin: timedelta) -> bool:
        if self.expiry is None:
            return True

        return now < self.expiry - safety_margin
