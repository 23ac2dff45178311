"""Audio format shared by recorder, recognizer and player."""

SAMPLE_RATE = 16000
CHANNELS = 1
