"""Entry point for running render as a module.

Usage:
    python -m render [options]

Example:
    python -m render --var name=world -t 'Hello {{ name }}'
    python -m render --var-file values.yaml --template-files 'k8s/*.yaml' -o out
"""

from render.cli import app

if __name__ == "__main__":
    app()
