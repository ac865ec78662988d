# Subpackages are imported explicitly, e.g.
# `from scriptcraft.core.generator import generate_code`.
