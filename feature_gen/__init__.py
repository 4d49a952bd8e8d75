"""Planning feature generator.

Converts recorded localization and chassis telemetry into batched learning
data files of feature snapshots and trajectory labels.
"""

__version__ = "0.1.0"
