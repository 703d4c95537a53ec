"""Monitor EcoFlow devices example.

This example demonstrates:
- Listing all devices
- Reading telemetry of every online device concurrently
- Reporting failures per device
"""

import asyncio
from datetime import datetime

from pyecoflow import Device, EcoFlowClient, EcoFlowConfig, EcoFlowError


async def monitor_device(client: EcoFlowClient, device: Device) -> dict:
    """Read the state of a single device.

    Args:
        client: Connected EcoFlowClient.
        device: Device to read.

    Returns:
        Dictionary with device status information.
    """
    if not device.is_online:
        return {"name": device.device_name, "status": "Offline", "values": 0}

    try:
        state = await client.get_full_state(device.serial_number)
    except EcoFlowError as err:
        return {"name": device.device_name, "status": f"Error: {err}", "values": 0}

    return {"name": device.device_name, "status": "Online", "values": len(state or {})}


async def main() -> None:
    """Poll all devices every minute."""
    async with EcoFlowClient.from_config(EcoFlowConfig.from_env()) as client:
        while True:
            devices = await client.list_devices()
            results = await asyncio.gather(*[monitor_device(client, device) for device in devices])

            print(f"\n[{datetime.now():%H:%M:%S}] {len(devices)} device(s)")
            for result in results:
                print(f"  {result['name']}: {result['status']} ({result['values']} values)")

            await asyncio.sleep(60)


if __name__ == "__main__":
    asyncio.run(main())
