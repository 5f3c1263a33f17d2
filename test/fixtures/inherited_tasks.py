"""
Fixture for testing class inheritance
"""
from base_tasks import BaseTasks


class Tasks(BaseTasks):
    async def shared_task(self, c, arg="default"):
        """Override shared task"""
        return f"child: {arg}"

    async def child_task(self, c):
        """Child-specific task"""
        return "child task executed"
