"""
The MODEL layer contains pure data structures and the analysis logic.
It has NO knowledge of the GUI (Qt) or of audio output.
It deals with Frequencies, Harmonics, Tuning and I/O of the reference table.
"""
