import asyncio
import sys

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

#Run to drive the stdio server end-to-end (mock mode unless credentials are set).
CALLS = [
    ("create_contact", {"first_name": "John", "last_name": "Doe",
                        "email": "john.doe@example.com", "company": "Test Company"}),
    ("search_contacts", {"query": "John"}),
    ("create_calendar_event", {"title": "Test Meeting", "date": "tomorrow", "time": "14:00",
                               "duration": 60, "location": "Conference Room"}),
    ("get_calendar_events", {}),
    ("get_tasks", {"status": "all"}),
]

async def main() -> None:
    params = StdioServerParameters(command=sys.executable, args=["-m", "egw_mcp.api.server"])
    async with stdio_client(params) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            init = await session.initialize()
            print(f"--- connected to {init.serverInfo.name} {init.serverInfo.version}")
            listed = await session.list_tools()
            print("--- tools:", ", ".join(t.name for t in listed.tools))
            for name, arguments in CALLS:
                result = await session.call_tool(name, arguments)
                flag = " (error)" if result.isError else ""
                print(f"--- {name}{flag}")
                print(result.content[0].text)

if __name__ == "__main__":
    asyncio.run(main())


# From root directory:
# python3 -m scripts.check_tools
