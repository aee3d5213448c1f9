#!/usr/bin/env python
"""
Command line console for the clinic backend.

Usage:
    clinic-console login owner@clinic.example
    clinic-console patients list --search meera
    clinic-console appointments advance <appointment-id>
    clinic-console bills create opd --patient <id> --doctor <id> --item "Consultation:1:500"
    clinic-console whatsapp connect "Front desk"
    clinic-console admin delete-tenant CLN-0001 --confirm CLN-0001
    clinic-console reports collection --from 2025-01-01 --csv
"""

import argparse
import asyncio
import getpass
import json
import logging
import sys
from typing import List, Optional

from clinic_console.core.config import settings
from clinic_console.core.exceptions import ClinicConsoleError, ValidationError
from clinic_console.core.navigation import Navigator, LOGIN_PATH
from clinic_console.models.appointments import CANCEL_ACTION, next_action
from clinic_console.models.billing import BillItem
from clinic_console.models.enums import (
    AppointmentStatus,
    AppointmentType,
    BillType,
    DiscountType,
    Gender,
    NEW_BILL_PAYMENT_MODES,
    PaymentMode,
    UserRole,
)
from clinic_console.models.patients import Doctor, Patient
from clinic_console.services.console import ClinicConsole
from clinic_console.services.reports import report_filename, write_csv

logger = logging.getLogger(__name__)

# Commands that run before a session exists; a 401 there is a wrong password
AUTH_COMMANDS = {"login", "signup", "activate"}

REPORT_KINDS = ["collection", "appointments", "patients"]


def _password(args) -> str:
    return args.password or getpass.getpass("Password: ")


def _print_json(data):
    print(json.dumps(data, indent=2, default=str))


def parse_item(text: str) -> BillItem:
    """Parse "description:quantity:rate" into a bill row."""
    parts = text.rsplit(":", 2)
    if len(parts) != 3:
        raise ValidationError(f"Bill item must look like 'description:quantity:rate', got '{text}'")
    description, quantity, rate = parts
    try:
        return BillItem(description=description, quantity=float(quantity), rate=float(rate))
    except ValueError:
        raise ValidationError(f"Quantity and rate must be numbers in '{text}'")


# --- Account ---

async def cmd_login(console: ClinicConsole, args):
    result = await console.auth.login(args.email, _password(args))
    print(f"✅ Logged in as {result.user.name} ({result.user.role}) at {result.tenant.name}")
    if result.tenant.needs_onboarding:
        print("Onboarding is not finished, run: clinic-console onboarding status")


async def cmd_logout(console: ClinicConsole, args):
    console.auth.logout()
    print("Logged out")


async def cmd_whoami(console: ClinicConsole, args):
    user = console.auth.get_user()
    tenant = console.auth.get_tenant()
    if not user:
        print("Not logged in")
        return
    print(f"{user.name} <{user.email}> ({user.role})")
    if tenant:
        print(f"Clinic: {tenant.name} [{tenant.tenant_id}]")
    marker = console.admin.current_impersonation()
    if marker:
        print(f"Viewing as super admin {marker.super_admin_name or ''}".rstrip())


async def cmd_signup(console: ClinicConsole, args):
    await console.auth.signup(args.email, args.owner_name, args.phone)
    print(f"✅ Check {args.email} for the activation link")


async def cmd_activate(console: ClinicConsole, args):
    target = await console.auth.verify_token(args.token)
    print(f"Activating {target.email} ({target.clinic_name or 'clinic'})")
    result = await console.auth.activate(args.token, _password(args))
    print(f"✅ Account activated, logged in as {result.user.email}")


# --- Patients ---

async def cmd_patients_list(console: ClinicConsole, args):
    page = await console.patients.list(search=args.search, page=args.page, limit=args.limit)
    for patient in page.patients:
        print(f"{patient.patient_id or patient.id}  {patient.name:<30} {patient.phone}")
    if page.pagination:
        print(f"Page {page.pagination.page}/{page.pagination.pages} ({page.pagination.total} patients)")


async def cmd_patients_show(console: ClinicConsole, args):
    patient = await console.patients.get(args.id)
    _print_json(patient.model_dump(mode="json", exclude_none=True))


async def cmd_patients_add(console: ClinicConsole, args):
    patient = Patient(
        name=args.name,
        phone=args.phone,
        age=args.age,
        gender=Gender(args.gender) if args.gender else None,
        email=args.email,
    )
    created = await console.patients.create(patient)
    print(f"✅ Patient registered: {created.patient_id or created.id}")


async def cmd_patients_delete(console: ClinicConsole, args):
    await console.patients.delete(args.id)
    print("Patient deactivated")


# --- Appointments ---

async def cmd_appointments_list(console: ClinicConsole, args):
    page = await console.appointments.list(date=args.date, status=args.status, doctor_id=args.doctor)
    for appt in page.appointments:
        patient = appt.patient.name if appt.patient else appt.patient_id
        doctor = appt.doctor.name if appt.doctor else appt.doctor_id
        print(f"#{appt.token_no or '-':<4} {appt.id}  {appt.status.value:<12} {patient} with {doctor}")


async def cmd_appointments_book(console: ClinicConsole, args):
    appt = await console.appointments.create(
        args.patient,
        args.doctor,
        args.date,
        type=AppointmentType(args.type),
        notes=args.notes
    )
    print(f"✅ Booked {appt.appointment_id or appt.id}, token #{appt.token_no}")


async def cmd_appointments_advance(console: ClinicConsole, args):
    appt = await console.appointments.get(args.id)
    action = next_action(appt.status)
    if action is None:
        raise ValidationError(f"Appointment is already {appt.status.value}")
    updated = await console.appointments.change_status(appt, action.target)
    print(f"✅ {action.label}: now {updated.status.value}")


async def cmd_appointments_cancel(console: ClinicConsole, args):
    appt = await console.appointments.get(args.id)
    updated = await console.appointments.change_status(appt, CANCEL_ACTION.target)
    print(f"Appointment {updated.status.value}")


# --- Doctors ---

async def cmd_doctors_list(console: ClinicConsole, args):
    for doctor in await console.doctors.list(search=args.search):
        print(f"{doctor.id}  {doctor.display_name:<30} {doctor.specialization or ''}")


async def cmd_doctors_add(console: ClinicConsole, args):
    doctor = Doctor(
        name=args.name,
        specialization=args.specialization,
        phone=args.phone,
        consultationFee=args.fee,
    )
    created = await console.doctors.create(doctor)
    print(f"✅ Doctor added: {created.display_name}")


# --- Billing ---

async def cmd_bills_list(console: ClinicConsole, args):
    page = await console.billing.book(BillType(args.type)).list(date_from=args.date_from, date_to=args.date_to)
    for bill in page.bills:
        print(f"{bill.bill_no or bill.id}  {bill.patient_name or '':<30} {bill.total:>10.2f}  {bill.payment_mode.value if bill.payment_mode else ''}")


async def cmd_bills_show(console: ClinicConsole, args):
    bill = await console.billing.book(BillType(args.type)).get(args.id)
    _print_json(bill.model_dump(mode="json", exclude_none=True))


async def cmd_bills_create(console: ClinicConsole, args):
    book = console.billing.book(BillType(args.type))
    draft = book.new_draft(
        items=[parse_item(text) for text in args.item or []] or [BillItem()],
        discount_type=DiscountType(args.discount_type),
        discount_value=args.discount,
        payment_mode=PaymentMode(args.payment_mode),
        remarks=args.remarks,
        patient_id=args.patient,
        doctor_id=args.doctor,
        appointment_id=args.appointment,
        walk_in_name=args.walk_in_name,
        walk_in_phone=args.walk_in_phone,
    )
    print(f"Subtotal {draft.subtotal:.2f}  Discount {draft.discount:.2f}  Total {draft.total:.2f}")
    bill = await book.create(draft)
    print(f"✅ Bill {bill.bill_no or bill.id} saved, total {bill.total:.2f}")


# --- Inventory ---

async def cmd_medicines_list(console: ClinicConsole, args):
    page = await console.medicines.list(search=args.search, include_stock=True)
    for medicine in page.medicines:
        flag = " LOW" if medicine.is_low_stock else ""
        print(f"{medicine.id}  {medicine.name:<30} {medicine.current_stock if medicine.current_stock is not None else '-'}{flag}")


async def cmd_medicines_low_stock(console: ClinicConsole, args):
    for medicine in await console.medicines.low_stock():
        print(f"{medicine.name:<30} {medicine.current_stock} (reorder at {medicine.reorder_level})")


async def cmd_medicines_expiring(console: ClinicConsole, args):
    for medicine in await console.medicines.expiring(args.days):
        print(f"{medicine.id}  {medicine.name}")


async def cmd_medicines_add_stock(console: ClinicConsole, args):
    batch = await console.medicines.add_stock(
        args.medicine,
        args.batch,
        args.quantity,
        args.expiry,
        purchase_price=args.purchase_price,
        selling_price=args.selling_price
    )
    print(f"✅ Batch {batch.batch_no} added ({batch.quantity} units, expires {batch.expiry_date})")


async def cmd_services_list(console: ClinicConsole, args):
    for item in await console.services.list(search=args.search, category=args.category):
        print(f"{item.id}  {item.name:<30} {item.category.value:<12} {item.rate:>10.2f}")


# --- Clinic ---

async def cmd_settings_show(console: ClinicConsole, args):
    bundle = await console.settings.get()
    _print_json(bundle.model_dump(mode="json", exclude_none=True))


async def cmd_users_list(console: ClinicConsole, args):
    for user in await console.users.list():
        state = "" if user.is_active else " (inactive)"
        print(f"{user.id}  {user.name:<25} {user.email:<30} {user.role.value}{state}")


async def cmd_users_add(console: ClinicConsole, args):
    user = await console.users.create(args.name, args.email, _password(args), UserRole(args.role), args.phone)
    print(f"✅ User {user.email} created")


async def cmd_users_delete(console: ClinicConsole, args):
    users = await console.users.list()
    user = next((u for u in users if u.id == args.id or u.email == args.id), None)
    if user is None:
        raise ValidationError(f"No user {args.id}")
    confirmation = args.confirm if args.confirm is not None else input(f"Type {user.email} to confirm: ")
    await console.users.delete(user, confirmation)
    print(f"User {user.email} deleted")


async def cmd_onboarding_status(console: ClinicConsole, args):
    status = await console.onboarding.status()
    step = status.next_step()
    if step is None:
        print("✅ Onboarding complete")
    else:
        print(f"Next step: {step.value}")
        print(f"Pending: {', '.join(s.value for s in status.pending_steps())}")


async def cmd_onboarding_skip(console: ClinicConsole, args):
    print(await console.onboarding.skip() or "Onboarding skipped")


async def cmd_onboarding_complete(console: ClinicConsole, args):
    print(await console.onboarding.complete() or "Onboarding completed")


async def cmd_dashboard(console: ClinicConsole, args):
    stats = await console.dashboard.stats()
    print(f"Patients: {stats.total_patients}")
    print(f"Today's appointments: {stats.today_appointments}")
    print(f"Today's revenue: {stats.today_revenue:.2f}")
    print(f"Low stock items: {stats.low_stock_items}")


async def cmd_reports(console: ClinicConsole, args):
    if args.kind == "collection":
        report = await console.reports.collection(args.date_from, args.date_to)
    elif args.kind == "appointments":
        report = await console.reports.appointments_summary(args.date_from, args.date_to)
    else:
        report = await console.reports.patient_count(args.date_from, args.date_to)

    print(f"{args.kind.capitalize()} report {report.date_from} to {report.date_to}")
    for label, value in report.rows()[1:]:
        print(f"  {label:<16} {value}")
    if args.csv is not None:
        path = args.csv or report_filename(args.kind, report)
        write_csv(report, path)
        print(f"✅ Exported {path}")


# --- Super admin ---

async def cmd_admin_login(console: ClinicConsole, args):
    await console.admin.login(args.email, _password(args))
    print("✅ Super admin login successful")


async def cmd_admin_tenants(console: ClinicConsole, args):
    page = await console.admin.list_tenants(page=args.page, status=args.status, search=args.search)
    for tenant in page.tenants:
        plan = tenant.subscription.plan if tenant.subscription else "-"
        state = "active" if tenant.is_active else "inactive"
        print(f"{tenant.tenant_id:<14} {tenant.name:<30} {plan:<10} {state}")
    if page.pagination:
        print(f"Page {page.pagination.page}/{page.pagination.pages} ({page.pagination.total} tenants)")


async def cmd_admin_impersonate(console: ClinicConsole, args):
    marker = await console.admin.impersonate(args.tenant_id)
    print(f"✅ Accessing {marker.tenant_name} as Super Admin")


async def cmd_admin_exit(console: ClinicConsole, args):
    if console.admin.exit_impersonation():
        print("Exited tenant view")
    else:
        print("Not viewing a tenant")


async def cmd_admin_delete_tenant(console: ClinicConsole, args):
    tenant = await console.admin.get_tenant(args.tenant_id)
    confirmation = args.confirm if args.confirm is not None else input(f"Type {tenant.tenant_id} to confirm: ")
    await console.admin.delete_tenant(tenant, confirmation)
    print(f"✅ Tenant \"{tenant.name}\" deleted successfully")


# --- WhatsApp ---

async def cmd_whatsapp_login(console: ClinicConsole, args):
    wizard = console.whatsapp_wizard()
    if args.register:
        await wizard.authenticate("register", args.email, _password(args), args.name)
        print("Registration successful! Please login.")
        return
    await wizard.authenticate("login", args.email, _password(args))
    print("✅ Login successful!")


async def cmd_whatsapp_sessions(console: ClinicConsole, args):
    wizard = console.whatsapp_wizard()
    sessions = await wizard.list_sessions()
    if not console.gateway.is_authenticated():
        print("WhatsApp gateway login expired, run: clinic-console whatsapp login")
        return
    for session in sessions:
        default = " (default)" if session.is_default else ""
        print(f"{session.id}  {session.session_name or '':<20} {session.status.value:<12} {session.phone_number or ''}{default}")


async def cmd_whatsapp_connect(console: ClinicConsole, args):
    wizard = console.whatsapp_wizard()
    if not console.gateway.is_authenticated():
        raise ValidationError("Log in to the WhatsApp gateway first: clinic-console whatsapp login")
    session = await wizard.create_session(args.session_name)
    print(f"Session {session.id} created! Scan the QR code to connect.")
    await _scan_and_wait(wizard, args)


async def cmd_whatsapp_reconnect(console: ClinicConsole, args):
    wizard = console.whatsapp_wizard()
    if not console.gateway.is_authenticated():
        raise ValidationError("Log in to the WhatsApp gateway first: clinic-console whatsapp login")
    session = await wizard.resume_session(args.session_id)
    print(f"Session {session.id} ({session.status.value}). Scan the QR code to connect.")
    await _scan_and_wait(wizard, args)


async def _scan_and_wait(wizard, args):
    qr = await wizard.fetch_qr()
    if args.qr_file and qr:
        with open(args.qr_file, "w", encoding="utf-8") as f:
            f.write(qr)
        print(f"QR code written to {args.qr_file}")
    elif qr:
        print(qr)

    result = await wizard.poll_status(on_status=lambda status: logger.info(f"Session status: {status}"))
    if result.connected:
        print(f"✅ WhatsApp connected successfully! {result.phone_number or ''}".rstrip())
    elif result.timed_out:
        raise ValidationError("Timed out waiting for the QR code to be scanned")
    else:
        raise ValidationError(result.error_message)


async def cmd_whatsapp_delete(console: ClinicConsole, args):
    wizard = console.whatsapp_wizard()
    sessions = await wizard.list_sessions()
    match = next((s for s in sessions if s.id == args.session_id), None)
    await wizard.delete_session(args.session_id, match.backend_id if match else None)
    print("Session deleted")


async def cmd_whatsapp_set_default(console: ClinicConsole, args):
    wizard = console.whatsapp_wizard()
    sessions = await wizard.list_sessions()
    match = next((s for s in sessions if s.id == args.session_id), None)
    if match is None or not match.backend_id:
        raise ValidationError(f"Session {args.session_id} has no clinic record to make default")
    await console.whatsapp.set_default(match.backend_id)
    print(f"✅ {match.session_name or match.id} is now the default WhatsApp number")


async def cmd_whatsapp_send(console: ClinicConsole, args):
    if args.file:
        result = await console.gateway.send_with_file(args.session_id, args.phone, args.file, args.message)
    else:
        if not args.message:
            raise ValidationError("Message text or --file is required")
        result = await console.gateway.send_message(args.session_id, args.phone, args.message)
    print(f"✅ {result.message or 'Message sent'}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clinic-console", description="Clinic management console")
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=['debug', 'info', 'warning', 'error'],
        help='Log level (default: LOG_LEVEL setting)'
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Log in to your clinic")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(handler=cmd_login)

    p = sub.add_parser("logout", help="Forget the stored session")
    p.set_defaults(handler=cmd_logout)

    p = sub.add_parser("whoami", help="Show the logged in user")
    p.set_defaults(handler=cmd_whoami)

    p = sub.add_parser("signup", help="Start a free trial")
    p.add_argument("email")
    p.add_argument("owner_name")
    p.add_argument("--phone")
    p.set_defaults(handler=cmd_signup)

    p = sub.add_parser("activate", help="Activate an account from its emailed token")
    p.add_argument("token")
    p.add_argument("--password")
    p.set_defaults(handler=cmd_activate)

    # patients
    patients = sub.add_parser("patients").add_subparsers(dest="action", required=True)
    p = patients.add_parser("list")
    p.add_argument("--search")
    p.add_argument("--page", type=int)
    p.add_argument("--limit", type=int)
    p.set_defaults(handler=cmd_patients_list)
    p = patients.add_parser("show")
    p.add_argument("id")
    p.set_defaults(handler=cmd_patients_show)
    p = patients.add_parser("add")
    p.add_argument("name")
    p.add_argument("phone")
    p.add_argument("--age", type=int)
    p.add_argument("--gender", choices=[g.value for g in Gender])
    p.add_argument("--email")
    p.set_defaults(handler=cmd_patients_add)
    p = patients.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(handler=cmd_patients_delete)

    # appointments
    appts = sub.add_parser("appointments").add_subparsers(dest="action", required=True)
    p = appts.add_parser("list")
    p.add_argument("--date")
    p.add_argument("--status", choices=[s.value for s in AppointmentStatus])
    p.add_argument("--doctor")
    p.set_defaults(handler=cmd_appointments_list)
    p = appts.add_parser("book")
    p.add_argument("patient")
    p.add_argument("doctor")
    p.add_argument("date")
    p.add_argument("--type", default=AppointmentType.NEW.value, choices=[t.value for t in AppointmentType])
    p.add_argument("--notes")
    p.set_defaults(handler=cmd_appointments_book)
    p = appts.add_parser("advance", help="Check in, start or complete")
    p.add_argument("id")
    p.set_defaults(handler=cmd_appointments_advance)
    p = appts.add_parser("cancel")
    p.add_argument("id")
    p.set_defaults(handler=cmd_appointments_cancel)

    # doctors
    doctors = sub.add_parser("doctors").add_subparsers(dest="action", required=True)
    p = doctors.add_parser("list")
    p.add_argument("--search")
    p.set_defaults(handler=cmd_doctors_list)
    p = doctors.add_parser("add")
    p.add_argument("name")
    p.add_argument("--specialization")
    p.add_argument("--phone")
    p.add_argument("--fee", type=float)
    p.set_defaults(handler=cmd_doctors_add)

    # bills
    bill_types = [t.value for t in BillType]
    bills = sub.add_parser("bills").add_subparsers(dest="action", required=True)
    p = bills.add_parser("list")
    p.add_argument("type", choices=bill_types)
    p.add_argument("--from", dest="date_from")
    p.add_argument("--to", dest="date_to")
    p.set_defaults(handler=cmd_bills_list)
    p = bills.add_parser("show")
    p.add_argument("type", choices=bill_types)
    p.add_argument("id")
    p.set_defaults(handler=cmd_bills_show)
    p = bills.add_parser("create")
    p.add_argument("type", choices=bill_types)
    p.add_argument("--item", action="append", help="description:quantity:rate, repeatable")
    p.add_argument("--patient")
    p.add_argument("--doctor")
    p.add_argument("--appointment")
    p.add_argument("--walk-in-name")
    p.add_argument("--walk-in-phone")
    p.add_argument("--discount", type=float, default=0)
    p.add_argument("--discount-type", default=DiscountType.FIXED.value, choices=[d.value for d in DiscountType])
    p.add_argument("--payment-mode", default=PaymentMode.CASH.value, choices=[m.value for m in NEW_BILL_PAYMENT_MODES])
    p.add_argument("--remarks")
    p.set_defaults(handler=cmd_bills_create)

    # medicines
    meds = sub.add_parser("medicines").add_subparsers(dest="action", required=True)
    p = meds.add_parser("list")
    p.add_argument("--search")
    p.set_defaults(handler=cmd_medicines_list)
    p = meds.add_parser("low-stock")
    p.set_defaults(handler=cmd_medicines_low_stock)
    p = meds.add_parser("expiring")
    p.add_argument("--days", type=int)
    p.set_defaults(handler=cmd_medicines_expiring)
    p = meds.add_parser("add-stock")
    p.add_argument("medicine")
    p.add_argument("batch")
    p.add_argument("quantity", type=int)
    p.add_argument("expiry", help="YYYY-MM-DD")
    p.add_argument("--purchase-price", type=float)
    p.add_argument("--selling-price", type=float)
    p.set_defaults(handler=cmd_medicines_add_stock)

    services = sub.add_parser("services").add_subparsers(dest="action", required=True)
    p = services.add_parser("list")
    p.add_argument("--search")
    p.add_argument("--category")
    p.set_defaults(handler=cmd_services_list)

    settings_cmd = sub.add_parser("settings").add_subparsers(dest="action", required=True)
    p = settings_cmd.add_parser("show")
    p.set_defaults(handler=cmd_settings_show)

    # users
    users = sub.add_parser("users").add_subparsers(dest="action", required=True)
    p = users.add_parser("list")
    p.set_defaults(handler=cmd_users_list)
    p = users.add_parser("add")
    p.add_argument("name")
    p.add_argument("email")
    p.add_argument("--role", default=UserRole.RECEPTIONIST.value, choices=[r.value for r in UserRole])
    p.add_argument("--phone")
    p.add_argument("--password")
    p.set_defaults(handler=cmd_users_add)
    p = users.add_parser("delete")
    p.add_argument("id", help="User id or email")
    p.add_argument("--confirm", help="The user's email, typed to confirm")
    p.set_defaults(handler=cmd_users_delete)

    onboarding = sub.add_parser("onboarding").add_subparsers(dest="action", required=True)
    p = onboarding.add_parser("status")
    p.set_defaults(handler=cmd_onboarding_status)
    p = onboarding.add_parser("skip")
    p.set_defaults(handler=cmd_onboarding_skip)
    p = onboarding.add_parser("complete")
    p.set_defaults(handler=cmd_onboarding_complete)

    # super admin
    admin = sub.add_parser("admin").add_subparsers(dest="action", required=True)
    p = admin.add_parser("login")
    p.add_argument("email")
    p.add_argument("--password")
    p.set_defaults(handler=cmd_admin_login)
    p = admin.add_parser("tenants")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--status")
    p.add_argument("--search")
    p.set_defaults(handler=cmd_admin_tenants)
    p = admin.add_parser("impersonate")
    p.add_argument("tenant_id")
    p.set_defaults(handler=cmd_admin_impersonate)
    p = admin.add_parser("exit", help="Leave the tenant view")
    p.set_defaults(handler=cmd_admin_exit)
    p = admin.add_parser("delete-tenant")
    p.add_argument("tenant_id")
    p.add_argument("--confirm", help="The tenant ID, typed to confirm")
    p.set_defaults(handler=cmd_admin_delete_tenant)

    # whatsapp
    wa = sub.add_parser("whatsapp").add_subparsers(dest="action", required=True)
    p = wa.add_parser("login", help="Log in to (or register with) the WhatsApp gateway")
    p.add_argument("email")
    p.add_argument("--password")
    p.add_argument("--register", action="store_true")
    p.add_argument("--name")
    p.set_defaults(handler=cmd_whatsapp_login)
    p = wa.add_parser("sessions")
    p.set_defaults(handler=cmd_whatsapp_sessions)
    p = wa.add_parser("connect", help="Create a session and wait for the QR scan")
    p.add_argument("session_name")
    p.add_argument("--qr-file", help="Write the base64 QR image here instead of printing it")
    p.set_defaults(handler=cmd_whatsapp_connect)
    p = wa.add_parser("reconnect", help="Show a new QR code for an existing session")
    p.add_argument("session_id")
    p.add_argument("--qr-file", help="Write the base64 QR image here instead of printing it")
    p.set_defaults(handler=cmd_whatsapp_reconnect)
    p = wa.add_parser("delete")
    p.add_argument("session_id")
    p.set_defaults(handler=cmd_whatsapp_delete)
    p = wa.add_parser("set-default", help="Use this session for outgoing clinic messages")
    p.add_argument("session_id")
    p.set_defaults(handler=cmd_whatsapp_set_default)
    p = wa.add_parser("send")
    p.add_argument("session_id")
    p.add_argument("phone")
    p.add_argument("message", nargs="?")
    p.add_argument("--file")
    p.set_defaults(handler=cmd_whatsapp_send)

    p = sub.add_parser("dashboard", help="Today's numbers")
    p.set_defaults(handler=cmd_dashboard)

    p = sub.add_parser("reports", help="Collection, appointment and patient reports")
    p.add_argument("kind", choices=REPORT_KINDS)
    p.add_argument("--from", dest="date_from", help="YYYY-MM-DD, default first of this month")
    p.add_argument("--to", dest="date_to", help="YYYY-MM-DD, default today")
    p.add_argument("--csv", nargs="?", const="", default=None, metavar="FILE",
                   help="Export as CSV (default name <kind>-report-<from>-to-<to>.csv)")
    p.set_defaults(handler=cmd_reports)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = args.log_level.upper() if args.log_level else settings.get_log_level()
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    navigator = Navigator(
        pathname=LOGIN_PATH if args.command in AUTH_COMMANDS else "/dashboard",
        on_redirect=lambda path: print("Session expired, please log in again: clinic-console login <email>")
    )

    try:
        settings.validate_on_startup()
        console = ClinicConsole(navigator=navigator)
        asyncio.run(args.handler(console, args))
    except ClinicConsoleError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\n👋 Cancelled")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
