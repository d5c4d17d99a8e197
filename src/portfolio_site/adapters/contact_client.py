"""HTTP client used by the contact form to reach the backend."""

from dataclasses import dataclass, field

import httpx


@dataclass(frozen=True)
class ContactSubmitResult:
    """Outcome of a contact form submission as seen by the form."""

    ok: bool
    message: str | None = None
    errors: list[dict[str, str]] = field(default_factory=list)


@dataclass
class HttpxContactClient:
    """Contact form client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxContactClient":
        """Create a contact client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def submit(
        self, name: str, email: str, subject: str, message: str
    ) -> ContactSubmitResult:
        """Post the four form fields and report the backend's answer."""
        url = f"{self.base_url}/api/contact"
        payload = {"name": name, "email": email, "subject": subject, "message": message}
        try:
            response = await self.http_client.post(url, json=payload, timeout=15)
        except httpx.HTTPError as exc:
            return ContactSubmitResult(ok=False, message=f"Failed to send: {exc}")
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        ok = response.is_success and data.get("ok") is True
        if ok:
            return ContactSubmitResult(ok=True, message=data.get("message"))
        return ContactSubmitResult(
            ok=False,
            message=data.get("message") or "Failed to send",
            errors=list(data.get("errors") or []),
        )

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
