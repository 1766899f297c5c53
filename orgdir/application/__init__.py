"""
===============================================================================
APPLICATION LAYER
===============================================================================

Use cases live in `usecases/` subpackages:

    from orgdir.application.usecases.directory import SetManagerUseCase
===============================================================================
"""
