"""Basic usage example for pyecoflow library.

Reads credentials from a .env file or the environment:
    ECOFLOW_ACCESS_KEY, ECOFLOW_SECRET_KEY and optionally ECOFLOW_SERIAL.
"""

import asyncio
import logging

from pyecoflow import EcoFlowClient, EcoFlowConfig, PowerState
from pyecoflow.const import SELF_TEST_SIGNATURE


async def main() -> None:
    """Demonstrate basic usage of pyecoflow."""
    config = EcoFlowConfig.from_env()

    async with EcoFlowClient.from_config(config) as client:
        # Verify request signing against the documented example
        signature = client.test_call()
        print(f"Signing self-test: {'OK' if signature == SELF_TEST_SIGNATURE else 'FAILED'}")

        devices = await client.list_devices()
        print(f"Found {len(devices)} device(s)")

        for device in devices:
            print(f"\nDevice: {device.device_name}")
            print(f"  Serial: {device.serial_number}")
            print(f"  Online: {device.is_online}")

        if config.default_serial is None:
            print("\nSet ECOFLOW_SERIAL to read and control a device")
            return

        state = await client.get_full_state()
        if state is None:
            print("\nDevice reported no state")
        else:
            print(f"\nDevice reported {len(state)} value(s)")
            for key, value in sorted(state.items()):
                print(f"  {key} = {value}")

        print("\nTurning device on...")
        await client.change_power_state(PowerState.ON)
        print("Done")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
