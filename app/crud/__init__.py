# app/crud/__init__.py
# Persistence helpers are plain function modules: `from app.crud import crud_enquiry`.
