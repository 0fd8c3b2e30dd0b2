"""Rigging MCPサーバーのコマンドラインエントリポイント。"""

if __name__ == "__main__":
    import uvicorn
    from starlette.middleware import Middleware

    from rigging.config import ServerConfig
    from rigging.logging import configure_logging
    from rigging.middleware import TokenAuthMiddleware
    from rigging.server import create_server

    config = ServerConfig()
    configure_logging(config.log_level)
    mcp = create_server(config)
    app = mcp.http_app(
        transport="streamable-http",
        middleware=[Middleware(TokenAuthMiddleware, url_token=config.url_token)],
    )
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
