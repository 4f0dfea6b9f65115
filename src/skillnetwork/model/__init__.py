"""
The MODEL layer contains pure data structures.
It has NO knowledge of the GUI (Qt) or of the simulation loop.
It deals with the skill graph, its kinematic state and the service payloads.
"""
