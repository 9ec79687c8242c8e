from .cli import app

app(prog_name="statement-csv")
