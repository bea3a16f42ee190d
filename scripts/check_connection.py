import asyncio
import httpx
from egw_mcp.config import settings
from egw_mcp.services.gateway import LiveGateway

#Run to check if EGroupware is reachable and the credentials work.
async def probe():
    gw = LiveGateway(settings)
    print("Testing connection to:", settings.egroupware_url, "| user:", settings.egroupware_username)
    try:
        await gw.authenticate()
        print("Connection OK, session:", gw.session.marker)
        client = gw._client
        for path in ("/calendar/", "/addressbook/", "/infolog/"):
            try:
                r = await client.get(path)
                print(f"{path}: {r.status_code}")
            except httpx.HTTPError as e:
                print(f"{path}: error {e}")
    finally:
        await gw.aclose()

if __name__ == "__main__":
    asyncio.run(probe())


# From root directory:
# python3 -m scripts.check_connection
