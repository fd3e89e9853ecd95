"""Homestay staff package.

Feature modules (shifts, attendance, reports, staff) each carry a model and a
service; shifts and attendance add a repository protocol with its MySQL
implementation and a thin Flask controller.
"""
