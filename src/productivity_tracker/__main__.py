from productivity_tracker.cli.main import app

app()
