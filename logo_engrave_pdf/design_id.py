"""
Design ID generation.
"""

# Standard Library
import datetime
import random
import re

# local repo modules
import logo_engrave_pdf as lep
import logo_engrave_pdf.config


DESIGN_ID_ALPHABET = lep.config.DESIGN_ID_ALPHABET
DESIGN_ID_LENGTH = lep.config.DESIGN_ID_LENGTH
DESIGN_ID_PATTERN = re.compile(r"^\d{6}_[A-Z2-9]{8}$")


#============================================
def build_candidate(rng: random.Random, now: datetime.datetime) -> str:
	"""
	Build one candidate ID such as "260109_K7QXM2PA".

	Args:
		rng: Random source.
		now: Local issuance time.

	Returns:
		Candidate design ID.
	"""
	suffix = "".join(rng.choice(DESIGN_ID_ALPHABET) for _ in range(DESIGN_ID_LENGTH))
	return f"{now.strftime('%y%m%d')}_{suffix}"


#============================================
def generate_design_id(
	existing_ids: set[str] | frozenset[str],
	rng: random.Random | None = None,
	now: datetime.datetime | None = None,
) -> str:
	"""
	Generate a design ID that is not in the existing set.

	Candidates are redrawn until one is verified absent from existing_ids.

	Args:
		existing_ids: IDs already issued.
		rng: Optional seeded random source; defaults to SystemRandom.
		now: Optional issuance time; defaults to local now.

	Returns:
		New design ID.
	"""
	if rng is None:
		rng = random.SystemRandom()
	if now is None:
		now = datetime.datetime.now()
	candidate = build_candidate(rng, now)
	while candidate in existing_ids:
		candidate = build_candidate(rng, now)
	return candidate


#============================================
def is_design_id(value: str) -> bool:
	return DESIGN_ID_PATTERN.match(value) is not None
