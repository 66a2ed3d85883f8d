# utils/monitoring.py
import asyncio
from typing import Any, Dict

import psutil

from utils.logging import logger

class StatsReporter:
    """Periodically logs pool activity while any miner is active"""
    def __init__(self, context, interval: int = 30):
        self.context = context
        self.interval = interval

    def report(self) -> bool:
        view = self.context.compute_stats()
        if view.total_miners == 0:
            return False
        logger.info(
            f"Active miners: {view.total_miners}, Total shares: {view.total_shares}, "
            f"Tokens distributed: {view.total_distributed}"
        )
        return True

    async def monitor_task(self):
        while True:
            try:
                await asyncio.sleep(self.interval)
                self.report()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error in stats reporter: {str(e)}")

def memory_usage() -> Dict[str, Any]:
    """Process and system memory figures for the admin dashboard"""
    process_memory = psutil.Process().memory_info()
    system_memory = psutil.virtual_memory()
    return {
        "rss": process_memory.rss,
        "vms": process_memory.vms,
        "systemPercent": system_memory.percent,
        "systemAvailable": system_memory.available,
    }
