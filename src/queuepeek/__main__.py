from queuepeek.cli import app

app()
