from routes.public import router as public_router

__all__ = ["public_router"]
