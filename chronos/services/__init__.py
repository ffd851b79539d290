"""Service layer: timer engine, stores, planner and AI collaborators"""
