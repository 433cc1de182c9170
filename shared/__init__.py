"""
Shared code for VTU backend services
"""
