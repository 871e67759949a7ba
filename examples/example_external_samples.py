"""
Example: Summarizing draws from an external sampler
---------------------------------------------------

Draws produced elsewhere (here faked as 4 chains x 1000 draws) are pooled
into a SampleSet and summarized exactly like grid draws.
"""

import numpy as np
import gridbayes as gb


rng = np.random.default_rng(0)
chains = rng.normal(154.6, 0.4, size=(4, 1000))

samples = gb.from_draws(chains, name="mu")
print(samples)
for name, row in gb.summarize(samples, widths=(0.89, 0.95)).items():
    print(name, {k: v for k, v in row.items() if k != "intervals"})
    for iv in row["intervals"]:
        print("  ", iv)
