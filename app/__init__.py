"""Debt notifier: role-addressed notifications, templates and debt reminders.

Kept as a regular package so ``app`` never resolves to an unrelated
namespace package installed in site-packages.
"""
