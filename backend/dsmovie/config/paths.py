from pathlib import Path


ROOT_DIR = Path(__file__).parent.parent.parent


DATA_DIR = ROOT_DIR / "data"
SEED_DIR = DATA_DIR / "seed"
LOGS_DIR = ROOT_DIR / "logs"

# Seed files
ROLES_PATH = SEED_DIR / "roles.csv"
USERS_PATH = SEED_DIR / "users.csv"
MOVIES_PATH = SEED_DIR / "movies.csv"
SCORES_PATH = SEED_DIR / "scores.csv"

# default sqlite database file
SQLITE_DEFAULT_PATH = ROOT_DIR / "dsmovie.db"
