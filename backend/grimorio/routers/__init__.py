from .scheduling import router as scheduling_router

__all__ = [
    "scheduling_router",
]
