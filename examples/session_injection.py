"""Example showing session injection for Home Assistant integration."""

import asyncio

from aiohttp import ClientSession

from pyecoflow import EcoFlowClient


async def main() -> None:
    """Demonstrate session injection pattern."""
    # The session is owned by the application, not by the client
    async with ClientSession() as session:
        client = EcoFlowClient(
            access_key="your_access_key",
            secret_key="your_secret_key",
            session=session,
        )

        async with client:
            devices = await client.list_devices()
            print(f"Found {len(devices)} device(s) using injected session")

            for device in devices:
                print(f"  - {device.device_name} ({device.serial_number})")

        # Session remains open after client exits
        print("\nClient closed, but session still available for other requests")


if __name__ == "__main__":
    asyncio.run(main())
