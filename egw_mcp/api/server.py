### --- standard + typing utilities --- ###
import argparse, asyncio, logging
from typing import Any, Dict, List

### --- third-party libraries --- ###
from fastapi import FastAPI
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

### --- project imports --- ###
from egw_mcp.config import settings, configure_logging
from egw_mcp.domain.schemas import ToolRequest, ToolResult
from egw_mcp.services.gateway import make_gateway
from egw_mcp.api.dispatcher import ToolDispatcher
from egw_mcp.api.tools import TOOLS

logger = logging.getLogger(__name__)

SERVER_NAME = "egroupware-mcp-server"
SERVER_VERSION = "1.0.0"

### ----------------------------- MCP (stdio) ----------------------------------- ###

def to_call_result(result: ToolResult) -> CallToolResult:
    """Map a ToolResult onto the MCP call_tool result (text content + isError)."""
    payload = result.to_content()
    return CallToolResult(
        content=[TextContent(type="text", text=block["text"]) for block in payload["content"]],
        isError=payload["isError"],
    )

def create_mcp_server(dispatcher: ToolDispatcher) -> Server:
    """
    MCP server over the tool dispatcher.
    Inputs:
        dispatcher: ToolDispatcher answering call_tool.
    Returns:
        mcp Server exposing the static TOOLS declarations.
    """
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [Tool(**tool) for tool in TOOLS]

    # Arguments are checked by the dispatcher's pydantic models, not the JSON schema.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> CallToolResult:
        result = await dispatcher.dispatch(name, arguments)
        return to_call_result(result)

    return server

### ------------------------------- HTTP ---------------------------------------- ###

def create_app(dispatcher: ToolDispatcher) -> FastAPI:
    """FastAPI surface over the same dispatcher (handy for curl smoke tests)."""
    api = FastAPI(title="EGroupware MCP Server")

    @api.get("/healthz")
    def healthz():
        """Health probe."""
        return {"ok": True, "test_mode": settings.test_mode}

    @api.get("/tools")
    def list_tools():
        """Static tool declarations (same as tools/list)."""
        return {"tools": TOOLS}

    @api.post("/tools/call")
    async def call_tool(req: ToolRequest):
        """Run one tool. Inputs: ToolRequest. Returns: tools/call result payload."""
        result = await dispatcher.call(req)
        return result.to_content()

    return api

### -------------- Global scope for core services (gateway + dispatcher) -------------- ###

gateway = make_gateway(settings)
dispatcher = ToolDispatcher(gateway)
app = create_app(dispatcher)

def main(argv=None) -> None:
    ap = argparse.ArgumentParser(prog="egroupware-mcp", description="EGroupware MCP server")
    ap.add_argument("--http", action="store_true", help="serve the FastAPI app instead of stdio")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    opts = ap.parse_args(argv)
    configure_logging()

    if opts.http:
        import uvicorn
        uvicorn.run(app, host=opts.host, port=opts.port)
        return

    if settings.test_mode:
        logger.info("EGroupware MCP server running in TEST MODE on stdio")
        logger.info("Set TEST_MODE=false and configure EGroupware credentials for live mode")
    else:
        logger.info("EGroupware MCP server running on stdio, backend %s", settings.egroupware_url)

    async def _run() -> None:
        server = create_mcp_server(dispatcher)
        try:
            async with stdio_server() as (read_stream, write_stream):
                await server.run(read_stream, write_stream, server.create_initialization_options())
        finally:
            await gateway.aclose()

    asyncio.run(_run())

if __name__ == "__main__":
    main()

### ---------------------- examples ---------------------------- ###
"""
# stdio (what an MCP client does)
python3 -m scripts.check_tools

# HTTP
python3 -m egw_mcp.api.server --http
curl -s localhost:8000/healthz
curl -sX POST localhost:8000/tools/call -H "content-type: application/json" \
  -d '{"name":"create_contact","arguments":{"first_name":"John","last_name":"Doe"}}'
"""
