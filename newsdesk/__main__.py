from newsdesk.cli import cli

cli()
