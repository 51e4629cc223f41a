from . import snippets_tools  # noqa: F401 - register snippet titles/resolve tools
from .server import mcp


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
