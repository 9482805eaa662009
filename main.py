"""
Vehicle Fleet Lifecycle
=======================
Entry point. Runs the background sweep worker over a small in-memory demo
fleet until interrupted.  Run with: python main.py
"""

import asyncio
import logging

from fleet.config import settings
from fleet.domain.entities import Vehicle
from fleet.domain.enums import Role
from fleet.workers import sweeper

logger = logging.getLogger(__name__)


def build_demo_fleet() -> list[Vehicle]:
    """Ten vehicles spread over the lifecycle."""
    fleet = [Vehicle.create(id=i) for i in range(1, 11)]
    fleet[1].start_ride(Role.END_USER)
    fleet[2].start_ride(Role.END_USER)
    fleet[2].finish_ride(12, Role.END_USER)  # ends on bounty
    fleet[3].set_bounty(Role.ADMIN)
    fleet[3].collect(Role.HUNTER)
    fleet[4].collect(Role.ADMIN)
    fleet[4].drop(Role.HUNTER)
    return fleet


async def main() -> None:
    fleet = build_demo_fleet()
    for v in fleet:
        logger.info("Vehicle %s: %s (battery %d%%)", v.id, v.state.value, v.battery)

    await sweeper.start_sweep_loop(lambda: fleet)
    try:
        await asyncio.Event().wait()
    finally:
        await sweeper.stop_sweep_loop()


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
