"""Service layer: use cases over the domain, returning ServiceResult.

Every public service method returns a :class:`~todoctl.services.result.ServiceResult`.
"""
