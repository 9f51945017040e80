"""Policy tables shared by every environment.

Also the defaults used when services are wired without a settings module.
"""

import os
from datetime import time

SCAN_CODE_PREFIX = os.getenv("SCAN_CODE_PREFIX", "LPRDS-")
# secure badges: <prefix><base64(xor(child_id:...))>
SCAN_SECURE_PREFIX = os.getenv("SCAN_SECURE_PREFIX", "LPRDS:")
SCAN_SECURE_KEY = os.getenv("SCAN_SECURE_KEY", "LPRDS_SECURE_KEY_2024")
SCAN_COOLDOWN_MINUTES = int(os.getenv("SCAN_COOLDOWN_MINUTES", "5"))
DEFAULT_GROUP_CAPACITY = int(os.getenv("DEFAULT_GROUP_CAPACITY", "15"))

# Children per educator; change here, not in code.
SECTION_POLICIES = {
    "creche_etoile": {"label": "Crèche Étoile", "age_range": "3-18 months", "ratio": 5},
    "creche_nuage": {"label": "Crèche Nuage", "age_range": "18-24 months", "ratio": 8},
    "creche_soleil": {"label": "Crèche Soleil TPS", "age_range": "24-36 months", "ratio": 8},
    "garderie": {"label": "Garderie", "age_range": "3-8 years", "ratio": 10},
    "maternelle_PS1": {"label": "Maternelle Petite Section 1", "age_range": "3-4 years", "ratio": 6},
    "maternelle_PS2": {"label": "Maternelle Petite Section 2", "age_range": "4-5 years", "ratio": 8},
    "maternelle_MS": {"label": "Maternelle Moyenne Section", "age_range": "5-6 years", "ratio": 10},
}

# section prefix -> arrivals strictly after this time are late
LATE_ARRIVAL_CUTOFFS = {
    "creche": time(9, 0),
    "maternelle": time(8, 0),
}
