from django.urls import path
from . import views

app_name = "judging"

urlpatterns = [
    # Carga en cancha
    path("scores/submit/", views.submit_score, name="submit_score"),

    # Revisión
    path("scores/<int:score_id>/verify/", views.verify_score, name="verify_score"),
    path("scores/<int:score_id>/correct/", views.correct_score, name="correct_score"),
    path("scores/<int:score_id>/reject/", views.reject_score, name="reject_score"),

    # Por competencia
    path("competitions/<int:competition_id>/preliminary-scores/", views.preliminary_scores, name="preliminary_scores"),
    path("competitions/<int:competition_id>/bulk-verify/", views.bulk_verify, name="bulk_verify"),
]
