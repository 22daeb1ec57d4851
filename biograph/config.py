"""Configuration constants for the publication graph explorer."""

import os

# ── Corpus ────────────────────────────────────────────────────────────

CORPUS_URL = os.environ.get(
    "BIOGRAPH_CORPUS_URL",
    "https://raw.githubusercontent.com/jgalazka/SB_publications/refs/heads/main/SB_publication_PMC.csv",
)
CORPUS_PATH = os.environ.get("BIOGRAPH_CORPUS_PATH")
CORPUS_TIMEOUT = 30

DEFAULT_CATEGORY = "General Space Biology"
DEFAULT_ORGANISM = "Multiple/Other"

# First matching row wins, so order matters.
CATEGORY_KEYWORDS = [
    ("Bone & Musculoskeletal", ["bone", "osteo", "skeletal"]),
    ("Radiation Biology", ["radiation", "cosmic", "particle"]),
    ("Plant Biology", ["plant", "arabidopsis", "root", "leaf"]),
    ("Cardiovascular & Muscle", ["muscle", "cardiac", "heart"]),
    ("Immunology", ["immune", "infection", "pathogen"]),
    ("Cell & Tissue Biology", ["cell", "stem", "tissue"]),
    ("Molecular Biology", ["gene", "dna", "rna", "protein"]),
    ("Microgravity Effects", ["microgravity", "weightless", "gravity"]),
    ("Neuroscience & Behavior", ["behavior", "cognitive", "neural"]),
    ("Metabolism & Nutrition", ["metabolism", "nutrition", "diet"]),
]

ORGANISM_KEYWORDS = [
    ("Human", ["human", "astronaut", "crew"]),
    ("Mouse", ["mouse", "mice", "murine"]),
    ("Rat", ["rat", "rodent"]),
    ("Arabidopsis", ["arabidopsis", "plant"]),
    ("Drosophila", ["drosophila", "fly"]),
    ("Cell Culture", ["cell line", "culture", "in vitro"]),
]

SAMPLE_PUBLICATIONS = [
    {
        "title": "Effects of Microgravity on Bone Density in Long-Duration Spaceflight",
        "link": "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC123456/",
        "category": "Bone & Musculoskeletal",
        "organism": "Human",
    },
    {
        "title": "Plant Growth and Development in Simulated Martian Conditions",
        "link": "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC789012/",
        "category": "Plant Biology",
        "organism": "Arabidopsis",
    },
    {
        "title": "Radiation-Induced DNA Damage in Space Environment Using Cell Culture Models",
        "link": "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC345678/",
        "category": "Radiation Biology",
        "organism": "Cell Culture",
    },
    {
        "title": "Muscle Atrophy Prevention During Extended Space Missions",
        "link": "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC901234/",
        "category": "Cardiovascular & Muscle",
        "organism": "Human",
    },
    {
        "title": "Immune System Response to Microgravity in Mouse Models",
        "link": "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC567890/",
        "category": "Immunology",
        "organism": "Mouse",
    },
]

# ── Graph construction ────────────────────────────────────────────────

CONCEPT_VOCABULARY = [
    "microgravity", "radiation", "bone", "muscle", "plant", "cell", "gene",
    "protein", "dna", "immune", "metabolism", "neural", "cardiac", "space",
    "astronaut", "tissue", "growth", "development",
]

FIRST_NAMES = ["Sarah", "Michael", "Jennifer", "David", "Emily", "Robert", "Lisa", "James"]
SURNAMES = ["Johnson", "Chen", "Williams", "Rodriguez", "Kim", "Anderson", "Patel", "Thompson"]

CENTRAL_LABEL_LENGTH = 50
RELATED_LABEL_LENGTH = 40
MAX_RELATED_PUBLICATIONS = 8

# ── Layout ────────────────────────────────────────────────────────────

CHARGE_CENTRAL = -400.0
CHARGE_DEFAULT = -200.0

LINK_DISTANCE = {"studies": 120.0, "authored": 80.0}
LINK_STRENGTH_PRIMARY = 0.5
LINK_STRENGTH_SECONDARY = 0.2

COLLISION_RADIUS = {
    "central": 35.0,
    "publication": 25.0,
    "concept": 20.0,
    "author": 15.0,
}

CENTER_STRENGTH = 0.05
COLLISION_STRENGTH = 1.0
INITIAL_RADIUS = 10.0  # phyllotaxis spacing for default placement

ALPHA_START = 1.0
ALPHA_MIN = 0.001
ALPHA_DECAY = 1 - ALPHA_MIN ** (1 / 300)  # ~300 ticks from hot to settled
ALPHA_DRAG_TARGET = 0.3
VELOCITY_DECAY = 0.4
SETTLE_ENERGY = 1e-4  # mean kinetic energy per node
TICK_INTERVAL = 1 / 60
MAX_SETTLE_TICKS = 1000

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600

# ── Interaction ───────────────────────────────────────────────────────

MIN_ZOOM = 0.1
MAX_ZOOM = 4.0
NODE_DIM_OPACITY = 0.1
EDGE_DIM_OPACITY = 0.08
SECONDARY_EDGE_OPACITY = 0.4

TYPE_COLORS = {
    "publication": "#4A90D9",
    "central": "#E74C3C",
    "author": "#2ECC71",
    "concept": "#F39C12",
}

TYPE_LABELS = {
    "publication": "Publications",
    "author": "Authors",
    "concept": "Concepts",
}

# ── Analysis ──────────────────────────────────────────────────────────

ANALYSIS_MODEL = os.environ.get("BIOGRAPH_ANALYSIS_MODEL", "gpt-4o-mini")

ANALYSIS_PROMPT = """You analyze NASA space biology research publications. Given a title and link,
return insights as JSON with this exact schema:
{
  "summary": "2-3 sentence summary of what the research investigates",
  "problemsAddressed": ["space biology challenge", "..."],
  "keyFindings": ["finding or expected outcome", "..."],
  "researchGoals": ["research objective", "..."],
  "futureDirections": ["next research step", "..."],
  "methodology": ["experimental approach", "..."],
  "impact": "significance for space biology and astronaut health"
}

Rules:
- Base the analysis on the title and established space biology knowledge
- Give 2-3 items per list
- If the title is ambiguous, say what the research likely investigates"""

ENTITY_TYPES = {
    "microgravity": "Environmental Condition",
    "radiation": "Environmental Hazard",
    "bone": "Biological System",
    "muscle": "Biological System",
    "plant": "Organism Type",
    "cell": "Biological Unit",
    "gene": "Molecular Component",
    "protein": "Molecular Component",
    "dna": "Molecular Component",
    "immune": "Biological System",
    "metabolism": "Biological Process",
}

DIAGRAMS = [
    ("bone", {
        "title": "Bone Loss Process",
        "nodes": ["Microgravity", "Osteoblast Inhibition", "Osteoclast Activation",
                  "Bone Loss", "Fracture Risk"],
        "connections": [
            ["Microgravity", "Osteoblast Inhibition"],
            ["Microgravity", "Osteoclast Activation"],
            ["Osteoblast Inhibition", "Bone Loss"],
            ["Osteoclast Activation", "Bone Loss"],
            ["Bone Loss", "Fracture Risk"],
        ],
    }),
    ("radiation", {
        "title": "Radiation Damage Process",
        "nodes": ["Space Radiation", "DNA Damage", "Cell Cycle Arrest",
                  "Repair/Apoptosis", "Long-term Effects"],
        "connections": [
            ["Space Radiation", "DNA Damage"],
            ["DNA Damage", "Cell Cycle Arrest"],
            ["Cell Cycle Arrest", "Repair/Apoptosis"],
            ["Repair/Apoptosis", "Long-term Effects"],
        ],
    }),
]

DEFAULT_DIAGRAM = {
    "title": "Research Process",
    "nodes": ["Space Environment", "Biological Response", "Physiological Changes",
              "Health Impact"],
    "connections": [
        ["Space Environment", "Biological Response"],
        ["Biological Response", "Physiological Changes"],
        ["Physiological Changes", "Health Impact"],
    ],
}
