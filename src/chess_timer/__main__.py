from dotenv import load_dotenv
from loguru import logger

from chess_timer.app_config import load_json_config, parse_app_config
from chess_timer.bootstrap import bootstrap_runtime
from chess_timer.server import mcp, set_runtime


def main() -> None:
    load_dotenv()

    app = parse_app_config(load_json_config())
    runtime = bootstrap_runtime(app)
    set_runtime(runtime)

    if runtime.log_descriptions:
        logger.info(f"Logging: {', '.join(runtime.log_descriptions)}")
    logger.info("Chess timer MCP server running on stdio")

    try:
        mcp.run()
    finally:
        set_runtime(None)
        runtime.close()


if __name__ == "__main__":
    main()
