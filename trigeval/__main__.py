# trigeval/__main__.py

from trigeval.cli.main import cli

if __name__ == "__main__":
    cli()
