"""Device control example.

This example demonstrates:
- Switching power state
- Changing sub-mode
- Handling rejected commands
"""

import asyncio
import sys

from pyecoflow import EcoFlowClient, EcoFlowConfig, PowerState, RemoteError, SubMode


async def main(serial_number: str | None = None) -> None:
    """Cycle a device through its sub-modes, then put it in standby."""
    config = EcoFlowConfig.from_env()

    async with EcoFlowClient.from_config(config) as client:
        try:
            await client.change_power_state(PowerState.ON, serial_number)
            print("Power: ON")

            for sub_mode in (SubMode.ECO, SubMode.SLEEP, SubMode.MAX):
                await client.change_sub_mode(sub_mode, serial_number)
                print(f"Sub-mode: {sub_mode.name}")
                await asyncio.sleep(5)

            await client.change_power_state(PowerState.STANDBY, serial_number)
            print("Power: STANDBY")

        except RemoteError as err:
            print(f"Command rejected by EcoFlow: {err.raw_body}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
