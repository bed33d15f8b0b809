"""Allow ``python -m iam_app``."""

from iam_app.cli.app import app

if __name__ == "__main__":
    app(prog_name="iam-app")
