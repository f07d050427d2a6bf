"""Notion API client for block appends and direct file uploads."""

from dataclasses import dataclass

import httpx

from photo_notes.services.workspace import FileUpload, WorkspaceClient

NOTION_VERSION = "2022-06-28"


@dataclass
class HttpxNotionClient(WorkspaceClient):
    """Workspace client implemented with httpx."""

    api_secret: str
    http_client: httpx.AsyncClient
    base_url: str = "https://api.notion.com/v1"

    @classmethod
    def create(cls, api_secret: str) -> "HttpxNotionClient":
        """Create a Notion client with a managed httpx session."""
        return cls(api_secret=api_secret, http_client=httpx.AsyncClient())

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_secret}",
            "Notion-Version": NOTION_VERSION,
        }

    async def append_blocks(
        self, page_id: str, children: list[dict[str, object]]
    ) -> None:
        """Append children blocks to a page."""
        url = f"{self.base_url}/blocks/{page_id}/children"
        response = await self.http_client.patch(
            url, headers=self._headers(), json={"children": children}, timeout=15
        )
        response.raise_for_status()

    async def create_file_upload(self) -> FileUpload:
        """Create a File Upload object and return its id and upload url."""
        response = await self.http_client.post(
            f"{self.base_url}/file_uploads",
            headers=self._headers(),
            json={},
            timeout=15,
        )
        if not response.is_success:
            raise RuntimeError(
                f"Failed to create file upload: {response.status_code} {response.text}"
            )
        payload = response.json()
        return FileUpload(id=payload["id"], upload_url=payload["upload_url"])

    async def send_file_upload(
        self, upload_url: str, filename: str, content: bytes, mime_type: str
    ) -> None:
        """Send file contents as multipart form data."""
        response = await self.http_client.post(
            upload_url,
            headers=self._headers(),
            files={"file": (filename, content, mime_type)},
            timeout=60,
        )
        if not response.is_success:
            raise RuntimeError(
                f"Failed to upload file contents: {response.status_code} "
                f"{response.text}"
            )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
