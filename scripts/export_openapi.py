"""Write the OpenAPI document of the HTTP facade to docs/openapi.json."""

import os
from pathlib import Path

import orjson


def main() -> None:
    # The schema is only served in development, so build it there
    os.environ.setdefault("APP_ENV", "development")

    from recibook.factory import create_app

    app = create_app()
    output = Path("docs/openapi.json")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(orjson.dumps(app.openapi(), option=orjson.OPT_INDENT_2))


if __name__ == "__main__":
    main()
