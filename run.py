from linepicks import create_app, db
from linepicks.models import Pick, Season, User

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "User": User,
        "Pick": Pick,
        "Season": Season,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
