"""Curated fallback content.

Used when live generation is unavailable or keeps producing invalid
payloads. Everything here is hand-authored, English, needs no network, and
passes the same validation gate as generated content.
"""

import random
from typing import Any

from pydantic import BaseModel

from partygen.content.kinds import ContentKind, get_kind_spec
from partygen.content.schemas import (
    CategoryParameters,
    PlayerCountParameters,
    RequestParameters,
    TriviaParameters,
    WhoAmIParameters,
)
from partygen.content.validation import SECRET_CODE_BOARD_SIZE


FALLBACK_TRIVIA: list[dict[str, Any]] = [
    {
        "question": "Which planet is known as the Red Planet?",
        "options": ["Venus", "Mars", "Jupiter", "Saturn"],
        "answer_index": 1,
        "explanation": "Mars is often called the 'Red Planet' because of its reddish appearance.",
        "difficulty": "Easy",
    },
    {
        "question": "Who wrote 'Romeo and Juliet'?",
        "options": ["Charles Dickens", "William Shakespeare", "Jane Austen", "Mark Twain"],
        "answer_index": 1,
        "explanation": "William Shakespeare wrote the famous tragedy Romeo and Juliet.",
        "difficulty": "Easy",
    },
    {
        "question": "What is the capital of France?",
        "options": ["London", "Berlin", "Madrid", "Paris"],
        "answer_index": 3,
        "explanation": "Paris is the capital and most populous city of France.",
        "difficulty": "Easy",
    },
    {
        "question": "What is the chemical symbol for Gold?",
        "options": ["Au", "Ag", "Fe", "Cu"],
        "answer_index": 0,
        "explanation": "Au comes from the Latin word for gold, 'Aurum'.",
        "difficulty": "Medium",
    },
    {
        "question": "In which year did the Titanic sink?",
        "options": ["1905", "1912", "1918", "1923"],
        "answer_index": 1,
        "explanation": "The Titanic sank in the North Atlantic Ocean in 1912.",
        "difficulty": "Medium",
    },
    {
        "question": "What is the largest ocean on Earth?",
        "options": ["Atlantic", "Indian", "Arctic", "Pacific"],
        "answer_index": 3,
        "explanation": "The Pacific covers about a third of the planet's surface.",
        "difficulty": "Easy",
    },
    {
        "question": "How many legs does a spider have?",
        "options": ["6", "8", "10", "12"],
        "answer_index": 1,
        "explanation": "Spiders are arachnids, which have eight legs.",
        "difficulty": "Easy",
    },
    {
        "question": "Which country gifted the Statue of Liberty to the United States?",
        "options": ["France", "Spain", "United Kingdom", "Italy"],
        "answer_index": 0,
        "explanation": "France gave the statue in 1886 to mark the friendship between the nations.",
        "difficulty": "Medium",
    },
    {
        "question": "What is the hardest natural substance?",
        "options": ["Gold", "Iron", "Diamond", "Quartz"],
        "answer_index": 2,
        "explanation": "Diamond tops the Mohs hardness scale at 10.",
        "difficulty": "Easy",
    },
    {
        "question": "Who painted the Mona Lisa?",
        "options": ["Michelangelo", "Leonardo da Vinci", "Raphael", "Vincent van Gogh"],
        "answer_index": 1,
        "explanation": "Leonardo da Vinci painted it in the early 1500s.",
        "difficulty": "Easy",
    },
    {
        "question": "What gas do plants absorb from the air for photosynthesis?",
        "options": ["Oxygen", "Nitrogen", "Carbon dioxide", "Helium"],
        "answer_index": 2,
        "explanation": "Plants take in carbon dioxide and release oxygen.",
        "difficulty": "Easy",
    },
    {
        "question": "Which is the smallest prime number?",
        "options": ["0", "1", "2", "3"],
        "answer_index": 2,
        "explanation": "2 is the smallest and the only even prime number.",
        "difficulty": "Medium",
    },
]

FALLBACK_CHARADES: list[dict[str, Any]] = [
    {"phrase": "Harry Potter", "category": "Movies", "hint": "Wizard boy", "difficulty": "Easy"},
    {"phrase": "Playing Tennis", "category": "Sports", "hint": "Racket and ball", "difficulty": "Easy"},
    {"phrase": "The Lion King", "category": "Movies", "hint": "Circle of Life", "difficulty": "Easy"},
    {"phrase": "Cooking Pasta", "category": "Activity", "hint": "Boiling water", "difficulty": "Easy"},
    {"phrase": "Astronaut", "category": "Jobs", "hint": "Space travel", "difficulty": "Medium"},
]

FALLBACK_FORBIDDEN: list[dict[str, Any]] = [
    {"target": "Coffee", "forbidden": ["Drink", "Caffeine", "Morning", "Starbucks"], "difficulty": "Easy"},
    {"target": "Beach", "forbidden": ["Sand", "Ocean", "Sun", "Summer"], "difficulty": "Easy"},
    {"target": "Superman", "forbidden": ["Hero", "Cape", "Fly", "Kryptonite"], "difficulty": "Medium"},
    {"target": "iPhone", "forbidden": ["Apple", "Mobile", "Call", "Steve Jobs"], "difficulty": "Medium"},
    {"target": "Guitar", "forbidden": ["Music", "Strings", "Instrument", "Play"], "difficulty": "Easy"},
]

FALLBACK_DEBATE: list[dict[str, Any]] = [
    {"topic": "Cats are better than dogs.", "side_a": "Pro-Cats", "side_b": "Pro-Dogs"},
    {"topic": "Pineapple belongs on pizza.", "side_a": "Yes", "side_b": "No"},
    {"topic": "Summer is better than Winter.", "side_a": "Summer", "side_b": "Winter"},
    {"topic": "Video games are a sport.", "side_a": "Sport", "side_b": "Not a sport"},
    {"topic": "Toilet paper should hang over, not under.", "side_a": "Over", "side_b": "Under"},
]

# Nine roles each so a full ten-player game can be served.
FALLBACK_IMPOSTOR: list[dict[str, Any]] = [
    {
        "location": "Hospital",
        "roles": ["Doctor", "Nurse", "Patient", "Surgeon", "Receptionist",
                  "Paramedic", "Visitor", "Pharmacist", "Janitor"],
    },
    {
        "location": "Pirate Ship",
        "roles": ["Captain", "Sailor", "Cook", "Prisoner", "Parrot",
                  "Navigator", "Lookout", "Cabin Boy", "Gunner"],
    },
    {
        "location": "School",
        "roles": ["Teacher", "Student", "Principal", "Janitor", "Coach",
                  "Librarian", "Nurse", "Lunch Lady", "Parent"],
    },
    {
        "location": "Restaurant",
        "roles": ["Chef", "Waiter", "Customer", "Manager", "Dishwasher",
                  "Food Critic", "Bartender", "Host", "Delivery Driver"],
    },
    {
        "location": "Space Station",
        "roles": ["Astronaut", "Alien", "Engineer", "Commander", "Scientist",
                  "Pilot", "Doctor", "Tourist", "Robot"],
    },
]

# Killer and Detective come first so any prefix is a playable cast.
FALLBACK_MURDER_MYSTERY: dict[str, Any] = {
    "title": "The Manor Mystery",
    "intro": "A wealthy tycoon has been found dead in his study. Who did it?",
    "characters": [
        {"name": "Butler Jeeves", "role": "Killer", "public_bio": "Loyal servant.",
         "secret_info": "You hated the tycoon."},
        {"name": "Detective Holmes", "role": "Detective", "public_bio": "Famous investigator.",
         "secret_info": "Solve the case."},
        {"name": "Maid Mary", "role": "Suspect", "public_bio": "Quiet cleaner.",
         "secret_info": "You stole some silver."},
        {"name": "Chef Pierre", "role": "Suspect", "public_bio": "Angry cook.",
         "secret_info": "He critiqued your food."},
        {"name": "Gardener Sam", "role": "Suspect", "public_bio": "Loves plants.",
         "secret_info": "He trampled your roses."},
        {"name": "Nephew Charles", "role": "Suspect", "public_bio": "Heir to the fortune.",
         "secret_info": "You are drowning in gambling debts."},
        {"name": "Lady Violet", "role": "Suspect", "public_bio": "The tycoon's old flame.",
         "secret_info": "He broke off your engagement."},
        {"name": "Doctor Grey", "role": "Suspect", "public_bio": "Family physician.",
         "secret_info": "You forged his prescriptions."},
        {"name": "Chauffeur Reggie", "role": "Suspect", "public_bio": "Drives the Rolls.",
         "secret_info": "You were about to be fired."},
        {"name": "Secretary Ada", "role": "Suspect", "public_bio": "Knows every secret.",
         "secret_info": "You rewrote his will last week."},
    ],
}

FALLBACK_PICTIONARY: list[dict[str, Any]] = [
    {"word": "Eiffel Tower", "category": "Landmark", "difficulty": "Medium"},
    {"word": "Pizza", "category": "Food", "difficulty": "Easy"},
    {"word": "Bicycle", "category": "Object", "difficulty": "Easy"},
    {"word": "Sleeping", "category": "Action", "difficulty": "Easy"},
    {"word": "Dragon", "category": "Fantasy", "difficulty": "Medium"},
]

FALLBACK_CATEGORY_RUSH: list[dict[str, Any]] = [
    {"letter": "S", "categories": ["Fruits", "Cities", "Animals", "Jobs", "Sports", "Colors"]},
    {"letter": "M", "categories": ["Movies", "Foods", "Countries", "Names", "Brands", "Songs"]},
    {"letter": "C", "categories": ["Cars", "Clothing", "Drinks", "Hobbies", "Tools", "Furniture"]},
    {"letter": "B", "categories": ["Books", "Bands", "Body Parts", "Buildings", "Breakfast Foods", "Birds"]},
    {"letter": "P", "categories": ["Plants", "Pizza Toppings", "Professions", "Parks", "Phone Apps", "Politicians"]},
]

FALLBACK_WHO_AM_I: list[dict[str, Any]] = [
    {"word": "Mickey Mouse", "hint": "Disney mascot"},
    {"word": "Albert Einstein", "hint": "E=mc2"},
    {"word": "Beyoncé", "hint": "Singer, Queen B"},
    {"word": "Spider-Man", "hint": "Web slinger"},
    {"word": "Santa Claus", "hint": "Ho ho ho"},
    {"word": "Pikachu", "hint": "Electric mouse"},
    {"word": "Cleopatra", "hint": "Queen of the Nile"},
    {"word": "Batman", "hint": "Caped crusader"},
    {"word": "Taylor Swift", "hint": "Eras Tour"},
    {"word": "Mario", "hint": "Plumber who jumps"},
    {"word": "Shrek", "hint": "Ogre in a swamp"},
    {"word": "Elvis Presley", "hint": "King of Rock and Roll"},
    {"word": "Sherlock Holmes", "hint": "221B Baker Street"},
    {"word": "Darth Vader", "hint": "I am your father"},
    {"word": "Cristiano Ronaldo", "hint": "Siuuu"},
    {"word": "Elsa", "hint": "Let it go"},
    {"word": "Napoleon", "hint": "French emperor"},
    {"word": "SpongeBob", "hint": "Lives in a pineapple"},
    {"word": "Harry Potter", "hint": "Boy who lived"},
    {"word": "Wonder Woman", "hint": "Lasso of truth"},
    {"word": "Michael Jackson", "hint": "Moonwalk"},
    {"word": "Gandalf", "hint": "You shall not pass"},
    {"word": "Queen Elizabeth II", "hint": "Longest-reigning British monarch"},
    {"word": "Homer Simpson", "hint": "D'oh!"},
]

FALLBACK_SECRET_CODE: list[str] = [
    "Time", "Year", "People", "Way", "Day", "Man", "Thing", "Woman", "Life", "Child",
    "World", "School", "State", "Family", "Student", "Group", "Country", "Problem", "Hand", "Part",
    "Place", "Case", "Week", "Company", "System", "Book", "Eye", "Job", "Word", "Business",
]

FALLBACK_WOULD_YOU_RATHER: list[dict[str, Any]] = [
    {"option_a": "Have the ability to fly", "option_b": "Be invisible"},
    {"option_a": "Always be 10 minutes late", "option_b": "Always be 20 minutes early"},
    {"option_a": "Speak all languages", "option_b": "Speak to animals"},
    {"option_a": "Have a rewind button for your life", "option_b": "Have a pause button for your life"},
    {"option_a": "Live without music", "option_b": "Live without movies"},
]

FALLBACK_TWO_TRUTHS: list[dict[str, Any]] = [
    {"statement1": "I have never broken a bone.", "statement2": "I have met a celebrity.",
     "statement3": "I can speak three languages.", "lie_index": 2},
    {"statement1": "I once won a hot dog eating contest.", "statement2": "I am terrified of spiders.",
     "statement3": "I have never been on an airplane.", "lie_index": 0},
    {"statement1": "I have a twin.", "statement2": "I have never eaten sushi.",
     "statement3": "I can juggle.", "lie_index": 1},
]

FALLBACK_NEVER_HAVE_I_EVER: list[dict[str, Any]] = [
    {"statement": "Never have I ever pretended to be sick to get out of something."},
    {"statement": "Never have I ever accidentally sent a text to the wrong person."},
    {"statement": "Never have I ever fallen asleep in public."},
    {"statement": "Never have I ever forgotten someone's name immediately after meeting them."},
    {"statement": "Never have I ever eaten food that fell on the floor."},
]


class FallbackProvider:
    """Serves curated content for every kind.

    Args:
        rng: Random source for picks and shuffles. Pass a seeded
            ``random.Random`` for deterministic output.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def fallback(
        self,
        kind: ContentKind,
        parameters: RequestParameters | None = None,
    ) -> BaseModel:
        """Build a curated payload for the kind.

        Args:
            kind: Content kind.
            parameters: Request parameters; sizes follow them when given.

        Returns:
            Instance of the kind's output model.
        """
        spec = get_kind_spec(kind)
        return spec.output_model.model_validate(self._raw(spec.kind, parameters))

    def _raw(self, kind: ContentKind, parameters: RequestParameters | None) -> dict[str, Any]:
        match kind:
            case ContentKind.TRIVIA:
                count = parameters.count if isinstance(parameters, TriviaParameters) else 5
                count = min(count, len(FALLBACK_TRIVIA))
                return {"questions": self._rng.sample(FALLBACK_TRIVIA, count)}
            case ContentKind.CHARADES:
                return self._pick_charade(parameters)
            case ContentKind.FORBIDDEN_WORDS:
                return self._rng.choice(FALLBACK_FORBIDDEN)
            case ContentKind.DEBATE:
                return self._rng.choice(FALLBACK_DEBATE)
            case ContentKind.IMPOSTOR:
                scenario = self._rng.choice(FALLBACK_IMPOSTOR)
                players = parameters.player_count if isinstance(parameters, PlayerCountParameters) else 6
                return {"location": scenario["location"], "roles": scenario["roles"][: players - 1]}
            case ContentKind.MURDER_MYSTERY:
                players = parameters.player_count if isinstance(parameters, PlayerCountParameters) else 5
                return {
                    **FALLBACK_MURDER_MYSTERY,
                    "characters": FALLBACK_MURDER_MYSTERY["characters"][:players],
                }
            case ContentKind.PICTIONARY:
                return self._rng.choice(FALLBACK_PICTIONARY)
            case ContentKind.CATEGORY_RUSH:
                return self._rng.choice(FALLBACK_CATEGORY_RUSH)
            case ContentKind.WHO_AM_I:
                count = parameters.count if isinstance(parameters, WhoAmIParameters) else 20
                words = list(FALLBACK_WHO_AM_I)
                self._rng.shuffle(words)
                return {"words": words[:count]}
            case ContentKind.SECRET_CODE:
                words = list(FALLBACK_SECRET_CODE)
                self._rng.shuffle(words)
                return {"words": words[:SECRET_CODE_BOARD_SIZE]}
            case ContentKind.WOULD_YOU_RATHER:
                return self._rng.choice(FALLBACK_WOULD_YOU_RATHER)
            case ContentKind.TWO_TRUTHS:
                return self._rng.choice(FALLBACK_TWO_TRUTHS)
            case ContentKind.NEVER_HAVE_I_EVER:
                return self._rng.choice(FALLBACK_NEVER_HAVE_I_EVER)
            case _:
                raise ValueError(f"Unknown content kind: {kind}")

    def _pick_charade(self, parameters: RequestParameters | None) -> dict[str, Any]:
        """Prefer a charade from the requested category when one exists."""
        pool = FALLBACK_CHARADES
        if isinstance(parameters, CategoryParameters) and parameters.category.lower() != "random":
            matching = [c for c in pool if c["category"].lower() == parameters.category.lower()]
            pool = matching or pool
        return self._rng.choice(pool)
