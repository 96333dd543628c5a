"""
Bank Simulator API Application Factory
"""

from fastapi import FastAPI

from .clients import router as clients_router
from .accounts import router as accounts_router
from .transfers import router as transfers_router
from .bank import router as bank_router
from .. import __version__


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Bank Simulator API",
        description="Simulated retail bank with monthly interest and loan processing",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Include routers
    app.include_router(clients_router, prefix="/clients", tags=["Clients"])
    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(transfers_router, prefix="/transfers", tags=["Transfers"])
    app.include_router(bank_router, prefix="/bank", tags=["Bank"])

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "banksim_api",
            "version": __version__
        }

    return app


# Create the app instance for uvicorn
app = create_app()
