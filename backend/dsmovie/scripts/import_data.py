import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd
from sqlalchemy.orm import Session
from tqdm import tqdm

from dsmovie.config import ROLES_PATH, USERS_PATH, MOVIES_PATH, SCORES_PATH, SCORE_MIN, SCORE_MAX
from dsmovie.db.database import SessionLocal, engine, Base
from dsmovie.db.models import MovieORM, UserORM, ScoreORM
from dsmovie.domain.models import Role, ScoreKey, User
from dsmovie.repositories import SQLAlchemyScoreRepo, SQLAlchemyUserRepo

logger = logging.getLogger(__name__)


def _open_session(db_session: Optional[Session]) -> tuple[Session, bool]:
    if db_session is not None:
        return db_session, False
    return SessionLocal(), True


def import_roles_from_csv(csv_path: Path, db_session: Optional[Session] = None) -> tuple[int, int, int]:
    """Import roles from CSV file (column: authority).

    Returns:
        tuple: (added_count, skipped_count, total_count)
    """
    session, owned = _open_session(db_session)
    user_repo = SQLAlchemyUserRepo(session)

    try:
        logger.info(f"Reading roles from {csv_path}...")
        roles = pd.read_csv(csv_path).dropna(subset=['authority'])
        roles = roles.drop_duplicates(subset=['authority'], keep='first')

        total = len(roles)
        added = 0
        skipped = 0

        for _, row in roles.iterrows():
            authority = str(row['authority']).strip()
            if user_repo.get_role_by_authority(authority) is None:
                user_repo.create_role(Role(authority=authority))
                added += 1
            else:
                skipped += 1

        logger.info(f"Role import summary: {added} added, {skipped} skipped, {total} total")
        return added, skipped, total

    except Exception as e:
        session.rollback()
        logger.error(f"Error importing roles: {e}")
        raise

    finally:
        if owned:
            session.close()


def import_users_from_csv(csv_path: Path, db_session: Optional[Session] = None) -> tuple[int, int, int]:
    """Import users from CSV file.

    Columns: name, username, password (already hashed), authorities
    ('|' separated). Unknown authorities are skipped with a warning.

    Returns:
        tuple: (added_count, skipped_count, total_count)
    """
    session, owned = _open_session(db_session)
    user_repo = SQLAlchemyUserRepo(session)

    try:
        logger.info(f"Reading users from {csv_path}...")
        users = pd.read_csv(csv_path).dropna(subset=['username', 'password'])

        duplicate_count = users.duplicated(subset=['username']).sum()
        if duplicate_count > 0:
            logger.info(f"Found {duplicate_count} duplicate usernames in CSV. Removing duplicates...")
            users = users.drop_duplicates(subset=['username'], keep='first')

        roles_by_authority = {}

        total = len(users)
        added = 0
        skipped = 0

        for _, row in tqdm(users.iterrows(), total=total, desc="Importing users"):
            username = str(row['username']).strip()
            if user_repo.get_by_username(username) is not None:
                skipped += 1
                continue

            user = User(
                username=username,
                password=str(row['password']),
                name=None if pd.isna(row.get('name')) else str(row['name'])
            )
            for authority in _split_authorities(row.get('authorities')):
                if authority not in roles_by_authority:
                    roles_by_authority[authority] = user_repo.get_role_by_authority(authority)
                role = roles_by_authority[authority]
                if role is None:
                    logger.warning(f"Unknown authority {authority} for user {username}")
                    continue
                user.add_role(role)

            user_repo.create(user)
            added += 1

        logger.info(f"User import summary: {added} added, {skipped} skipped, {total} total")
        return added, skipped, total

    except Exception as e:
        session.rollback()
        logger.error(f"Error importing users: {e}")
        raise

    finally:
        if owned:
            session.close()


def import_movies_from_csv(csv_path: Path, db_session: Optional[Session] = None, batch_size: int = 100) -> tuple[int, int, int]:
    """Import movies from CSV file (columns: title, image).

    Movies start with no scores; their score and count come from the score import.

    Returns:
        tuple: (added_count, skipped_count, total_count)
    """
    session, owned = _open_session(db_session)

    try:
        logger.info(f"Reading movies from {csv_path}...")
        movies = pd.read_csv(csv_path)

        before_cleaning = len(movies)
        movies = movies.dropna(subset=['title'])
        if len(movies) < before_cleaning:
            logger.info(f"Removed {before_cleaning - len(movies)} movies with missing titles.")

        duplicate_titles = movies.duplicated(subset=['title']).sum()
        if duplicate_titles > 0:
            logger.info(f"Found {duplicate_titles} duplicate titles, deduplicating")
            movies = movies.drop_duplicates(subset=['title'], keep='first')

        total = len(movies)
        added = 0
        skipped = 0
        batch_counter = 0

        for _, row in tqdm(movies.iterrows(), total=total, desc="Importing movies"):
            title = str(row['title']).strip()
            if session.query(MovieORM).filter(MovieORM.title == title).first() is not None:
                skipped += 1
                continue

            image = row.get('image')
            session.add(MovieORM(
                title=title,
                score=0.0,
                count=0,
                image=None if pd.isna(image) else str(image)
            ))
            added += 1
            batch_counter += 1

            if batch_counter >= batch_size:
                session.commit()
                batch_counter = 0

        if batch_counter > 0:
            session.commit()

        logger.info(f"Movie import summary: {added} added, {skipped} skipped, {total} total")
        return added, skipped, total

    except Exception as e:
        session.rollback()
        logger.error(f"Error importing movies: {e}")
        raise

    finally:
        if owned:
            session.close()


def import_scores_from_csv(csv_path: Path, db_session: Optional[Session] = None) -> tuple[int, int, int, int]:
    """Import scores from CSV file (columns: title, username, value).

    Rows pointing at unknown movies or users, and values outside
    SCORE_MIN-SCORE_MAX, are skipped. A row for a user who already scored the
    movie replaces that score. Every touched movie gets its score and count
    recomputed.

    Returns:
        tuple: (added_count, updated_count, skipped_count, total_count)
    """
    session, owned = _open_session(db_session)
    score_repo = SQLAlchemyScoreRepo(session)

    try:
        logger.info(f"Reading scores from {csv_path}...")
        scores = pd.read_csv(csv_path).dropna(subset=['title', 'username', 'value'])

        duplicate_count = scores.duplicated(subset=['title', 'username']).sum()
        if duplicate_count > 0:
            logger.info(f"Found {duplicate_count} duplicate scores in CSV, keeping the last one per user and movie")
            scores = scores.drop_duplicates(subset=['title', 'username'], keep='last')

        movie_ids = {m.title: m.id for m in session.query(MovieORM.title, MovieORM.id)}
        user_ids = {u.username: u.id for u in session.query(UserORM.username, UserORM.id)}

        total = len(scores)
        added = 0
        updated = 0
        skipped = 0
        touched = set()

        for _, row in tqdm(scores.iterrows(), total=total, desc="Importing scores"):
            movie_id = movie_ids.get(str(row['title']).strip())
            user_id = user_ids.get(str(row['username']).strip())
            value = float(row['value'])

            if movie_id is None or user_id is None or not SCORE_MIN <= value <= SCORE_MAX:
                logger.debug(f"Skipped score row: {row.to_dict()}")
                skipped += 1
                continue

            if score_repo.get_by_key(ScoreKey(movie_id=movie_id, user_id=user_id)) is None:
                added += 1
            else:
                updated += 1
            session.merge(ScoreORM(movie_id=movie_id, user_id=user_id, value=value))
            touched.add(movie_id)

        session.flush()
        recompute_movie_aggregates(session, touched)
        session.commit()

        logger.info(f"Score import summary: {added} added, {updated} updated, {skipped} skipped, {total} total")
        return added, updated, skipped, total

    except Exception as e:
        session.rollback()
        logger.error(f"Error importing scores: {e}")
        raise

    finally:
        if owned:
            session.close()


def recompute_movie_aggregates(session: Session, movie_ids: Iterable[int]) -> None:
    """Set each movie's score to the plain mean of its stored scores."""
    score_repo = SQLAlchemyScoreRepo(session)
    for movie_id in movie_ids:
        values = [score.value for score in score_repo.get_movie_scores(movie_id)]
        movie = session.get(MovieORM, movie_id)
        movie.count = len(values)
        movie.score = sum(values) / len(values) if values else 0.0


def _split_authorities(value) -> list[str]:
    if value is None or pd.isna(value):
        return []
    return [part.strip() for part in str(value).split('|') if part.strip()]


def purge_database():
    """Purge all data from the database."""
    logger.info("Purging database...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.info("Database purged successfully")


def import_all(purge: bool = False):
    if purge:
        purge_database()
    else:
        Base.metadata.create_all(bind=engine)

    import_roles_from_csv(ROLES_PATH)
    import_users_from_csv(USERS_PATH)
    import_movies_from_csv(MOVIES_PATH)
    import_scores_from_csv(SCORES_PATH)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the DSMovie database from CSV files")
    parser.add_argument("--purge", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    import_all(purge=args.purge)
