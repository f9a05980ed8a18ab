"""
Script to seed a demo account with one deck of sample flashcards and a welcome news item.
Does nothing if the demo user already exists.
"""
import sys
import logging
from pathlib import Path

# Add the api directory to Python path so we can import from app
script_dir = Path(__file__).parent
api_dir = script_dir.parent
sys.path.insert(0, str(api_dir))

from sqlmodel import Session
from app.core.database import engine, init_db
from app.models.models import Flashcard
from app.services.deck_service import DeckService, build_deck
from app.services.flashcard_service import FlashcardService
from app.services.news_service import create_news
from app.services.user_service import find_user_by_email, register_user

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo-password"

# (front, back, example)
SAMPLE_CARDS = [
    ("der Hund", "the dog", "Der Hund schläft."),
    ("die Katze", "the cat", "Die Katze trinkt Milch."),
    ("das Haus", "the house", "Das Haus ist groß."),
    ("der Baum", "the tree", None),
    ("das Buch", "the book", "Ich lese ein Buch."),
    ("die Stadt", "the city", None),
    ("der Tisch", "the table", None),
    ("das Wasser", "the water", "Das Wasser ist kalt."),
    ("die Sonne", "the sun", None),
    ("der Mond", "the moon", None),
    ("die Schule", "the school", "Die Kinder gehen zur Schule."),
    ("das Fenster", "the window", None),
]


def seed_demo_data():
    """Create the demo user, deck, cards and news item."""
    init_db()
    with Session(engine) as session:
        if find_user_by_email(session, DEMO_EMAIL):
            logger.info(f"Demo user {DEMO_EMAIL} already exists, skipping")
            return

        user = register_user(session, DEMO_EMAIL, "Demo", DEMO_PASSWORD, is_admin=True)
        logger.info(f"Created demo user {user.id}")

        deck = DeckService(session).save_deck(
            build_deck(user.id, "German basics", "Common German nouns with their articles")
        )
        flashcard_service = FlashcardService(session)
        for front, back, example in SAMPLE_CARDS:
            flashcard_service.save_flashcard(
                Flashcard(deck_id=deck.id, front_text=front, back_text=back, example=example)
            )
        logger.info(f"Created deck {deck.id} with {len(SAMPLE_CARDS)} cards")

        create_news(session, "Welcome", "Create a deck, add cards and start practicing.", user.name)
        logger.info("Created welcome news item")


if __name__ == "__main__":
    logger.info("Starting demo data seeding...")
    try:
        seed_demo_data()
        logger.info("Successfully completed!")
    except Exception as e:
        logger.error("Error during seeding: %s", e, exc_info=True)
        sys.exit(1)
