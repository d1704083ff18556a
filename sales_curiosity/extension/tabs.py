"""
Browser tabs as seen by the extension popup.

A tab has a URL, the page HTML and, if the content script was injected, a
ContentScript that answers messages. Sending to a tab without one fails the
same way chrome.tabs.sendMessage does.
"""

from typing import Any, Dict, Optional

from .extractor import ContentScript


class MessageDeliveryError(Exception):
    """No receiver in the tab (content script not injected or page not refreshed)."""


class BrowserTab:
    def __init__(self, url: Optional[str], html: str = "", content_script: bool = True, tab_id: int = 1):
        self.tab_id = tab_id
        self.url = url
        self.html = html
        self.content_script = ContentScript(lambda: self.html) if content_script else None

    async def send_message(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if self.content_script is None:
            raise MessageDeliveryError("Could not establish connection. Receiving end does not exist.")
        return self.content_script.on_message(message)


class TabSource:
    """Holds the active tab of the current window."""

    def __init__(self, active: Optional[BrowserTab] = None):
        self._active = active

    def activate(self, tab: Optional[BrowserTab]) -> None:
        self._active = tab

    async def active_tab(self) -> Optional[BrowserTab]:
        return self._active
