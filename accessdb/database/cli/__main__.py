from accessdb.database.cli import cli

cli(obj={})
