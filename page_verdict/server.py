"""Page Server - serves the directory of the page under test on a loopback address"""
import logging
from pathlib import Path
from typing import Optional, Union

from aiohttp import web

logger = logging.getLogger(__name__)

headers = {'Cache-Control': 'no-store'}


class PageServer:
    def __init__(self, root: Union[str, Path], address="127.0.0.1", port=0):
        # Directory holding the page and whatever it loads relative to itself
        self.root = Path(root).resolve()
        self.address = address
        self.port = port
        self.runner = None
        self.site = None

    async def handle_health(self, request):
        return web.json_response({"status": "healthy", "root": str(self.root)}, headers=headers)

    @property
    def bound_port(self) -> Optional[int]:
        """Actual listening port; differs from self.port when 0 was requested."""
        if not self.runner or not self.runner.addresses:
            return None
        return self.runner.addresses[0][1]

    def url_for(self, name: str) -> str:
        return f"http://{self.address}:{self.bound_port}/{name}"

    async def start_server(self):
        if not self.root.is_dir():
            raise FileNotFoundError(f"Cannot serve missing directory: {self.root}")

        app = web.Application()
        app.add_routes([web.get('/__health', self.handle_health)])
        app.add_routes([web.static('/', self.root, show_index=False)])
        self.runner = web.AppRunner(app)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.address, self.port)
        await self.site.start()
        logger.info("Serving %s on http://%s:%s", self.root, self.address, self.bound_port)

    async def stop_server(self):
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            self.site = None

    async def __aenter__(self) -> "PageServer":
        await self.start_server()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop_server()
