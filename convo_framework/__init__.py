"""
Convo Framework module.

Provides the dialogue layer built on top of the engine:
- Components (variable store, script nodes, display events)
- Dialogue (parser, evaluator, interpreter, typewriter, validator)
- Systems (input and frame-time adapter)
"""
