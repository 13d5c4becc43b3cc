from django.urls import path
from . import views

urlpatterns = [
    # índice del leaderboard
    path("", views.leaderboard_index, name="leaderboard_index"),

    # clasificación por competencia
    path("<slug:slug>/", views.competition_leaderboard, name="competition_leaderboard"),
    path("<slug:slug>/teams/", views.team_leaderboard, name="team_leaderboard"),
    path("<slug:slug>/handicap/", views.handicap_start_list, name="handicap_start_list"),
    path("<slug:slug>/de-bracket/", views.de_bracket, name="de_bracket"),
]
