from __future__ import annotations

import streamlit as st

st.title("Methodology")

st.markdown(
    r"""
### Key definitions
- **Observation window** = the activity date plus the following days (channel-specific length)
- **Clean day** = a day outside every live activity's observation window on the channel
- **Baseline[D]** = median of the most recent clean days before D (up to the baseline window length, looking back at most the lookback ceiling)
- **Pool[D]** = max(0, observed[D] − baseline[D])
- **Click-share** = activity clicks / clicks of every activity live on D

### Attribution formulas
- **Attributed[A, D] = Pool[D] × share[A, D]**
- **Incremental[A] = Σ over A's window of Attributed[A, D]**
- If nobody active on D has click data, the pool is split equally.
- If others have clicks and A has none, A gets nothing on D.

### Confidence tiers
- **HIGH** if incremental > 2σ√W, **MED** if > 1σ√W, else **LOW**
- σ = population std. dev. of clean-day signups; W = window length
- A signal-to-noise heuristic, not a p-value

### When results are directional only
- Few or no clean baseline days (heavy activity calendars)
- Zero-variance baselines
- Activities without click evidence sharing days with activities that have it

### Scope boundaries
- No holdout groups, no cross-channel spillover, no learned attribution curves.
- Directly tracked signups are shown as a floor but never enforced.
"""
)

st.info("Attributed totals across a channel never exceed the observed surplus over baseline.")
