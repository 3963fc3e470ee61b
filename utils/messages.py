"""
Centralized Spanish UI messages.
All user-facing text in Spanish for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Bienvenido {name}',
    'logout_success': 'Sesión cerrada correctamente',
    'reservation_created': 'Reserva creada correctamente',
    'reservation_cancelled': 'Reserva cancelada',
    'cessions_created': 'Plaza cedida para {count} día(s)',
    'cession_cancelled': 'Cesión cancelada',
    'cession_and_reservation_cancelled': 'Cesión cancelada y reserva del empleado anulada',
    'visitor_created': 'Reserva de visitante creada',
    'visitor_updated': 'Reserva de visitante actualizada',
    'visitor_cancelled': 'Reserva de visitante cancelada',

    # Authorization
    'not_authenticated': 'No autenticado',
    'invalid_credentials': 'Usuario o contraseña incorrectos',
    'account_disabled': 'Su cuenta ha sido desactivada. Contacte al administrador.',
    'permission_denied': 'No tiene permisos para esta acción',
    'management_only': 'Solo directivos pueden ceder plazas',
    'not_spot_owner': 'Solo puedes ceder tu propia plaza',
    'not_reservation_owner': 'No puedes cancelar esta reserva',
    'not_cession_owner': 'No puedes cancelar esta cesión',
    'not_visitor_owner': 'Solo quien creó la reserva de visitante puede modificarla',

    # Not found
    'spot_not_found': 'Plaza no encontrada',
    'reservation_not_found': 'Reserva no encontrada',
    'cession_not_found': 'Cesión no encontrada',
    'visitor_not_found': 'Reserva de visitante no encontrada',

    # Conflicts
    'already_reserved_that_day': 'Ya tienes una reserva para este día',
    'spot_already_reserved': 'Esta plaza ya está reservada para este día',
    'spot_not_ceded': 'Esta plaza de dirección no está cedida para este día',
    'spot_visitor_blocked': 'Esta plaza está reservada para un visitante ese día',
    'cession_already_exists': 'Ya existe una cesión para esta plaza en uno de los días seleccionados',
    'cession_already_booked': 'No se puede cancelar: alguien ya ha reservado esta plaza',
    'visitor_spot_taken': 'Esta plaza ya tiene una reserva de visitante para este día',
    'past_date': 'No se pueden hacer reservas en fechas pasadas',

    # Partial failures
    'cession_cascade_failed': (
        'Cesión cancelada, pero no se pudo anular la reserva #{reservation_id} del empleado. '
        'Revísala manualmente.'
    ),

    # Generic
    'invalid_data': 'Datos inválidos',
    'unexpected_error': 'Ha ocurrido un error inesperado',
    'data_access_error': 'Error al obtener los datos de plazas',
    'not_found': 'Recurso no encontrado',

    # Validation messages
    'field_required': 'Este campo es requerido',
    'invalid_date': 'Fecha inválida (formato AAAA-MM-DD)',
    'invalid_email': 'Email inválido',
    'select_one_day': 'Selecciona al menos un día',
    'visitor_name_required': 'Nombre requerido',
    'visitor_company_required': 'Empresa requerida',
}


# Labels for the coarse day statuses shown on the calendar
DAY_STATUS_LABELS = {
    'plenty': 'Hay plazas',
    'few': 'Quedan pocas',
    'none': 'Sin plazas',
    'reserved': 'Ya tienes reserva',
    'past': 'Pasado',
    'weekend': 'Fin de semana',
    'can-cede': 'Puedes ceder',
    'ceded-free': 'Cedida, sin reservar',
    'ceded-taken': 'Cedida y reservada',
    'in-use': 'En uso',
}
