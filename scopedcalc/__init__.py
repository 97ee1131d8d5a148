"""scopedcalc: a scoped integer buffer around a guarded arithmetic evaluation.

Acquires a buffer, fills it with its own indices, evaluates one binary
operation (+, -, *, /) with a division guard, and releases the buffer on
every exit path. Failures come back as tagged outcomes, never sentinels.

Usage:
    python -m scopedcalc run                        # Default run: 100 slots, 10 + 5
    python -m scopedcalc run --b 0 --op /           # Division by zero, buffer still released
    python -m scopedcalc eval 10 '*' 5              # Evaluate only
    python -m scopedcalc ops                        # Show operators
"""
