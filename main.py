from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import CORS_ORIGINS, HOST, PORT
from db import Store, log_error, log_info
from routes import cashback, rulesets, transactions
from routes.dependencies import failed_response


def create_app(store=None):
    """
    Build the API around a store. Each app owns its store for the lifetime
    of the process; pass one in to share or inspect it.
    """
    app = FastAPI(
        title="Cashback API",
        description="Records transactions and awards cashback from promotional rulesets",
    )
    app.state.store = store or Store()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_failed(request: Request, exc: RequestValidationError):
        log_error(f"{request.method} {request.url.path} rejected: {exc.errors()}")
        return failed_response()

    app.include_router(rulesets.router)
    app.include_router(transactions.router)
    app.include_router(cashback.router)

    return app


app = create_app()


if __name__ == "__main__":
    log_info(f"Server running on port {PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
