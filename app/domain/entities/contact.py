from dataclasses import dataclass


@dataclass(frozen=True)
class ContactMessage:
    first_name: str
    last_name: str
    email: str
    inquiry_type: str
    subject: str
    message: str
    phone: str | None = None
    created_at: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
